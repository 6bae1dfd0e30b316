"""DOI normalization."""


def normalize_doi(doi: str | None) -> str:
    """Normalize a DOI for case-insensitive exact comparison.

    No prefix or URL stripping is applied: ``doi:10.1/x`` and ``10.1/x``
    are different values.

    Parameters
    ----------
    doi : str | None
        Raw DOI field value.

    Returns
    -------
    str
        Trimmed, casefolded DOI, or an empty string when missing.
    """
    if not doi:
        return ""
    return doi.strip().casefold()
