import re

_DOT_RUN = re.compile(r"\.{2,}")
_DASH_RUN = re.compile(r"-{2,}")


def derive_file_name(company_name: str) -> str:
    """
    Turn an insurance company name into its output file name.

    Lower-cases, swaps spaces for dashes, appends ".csv", then collapses runs of
    dots and runs of dashes. Distinct names can map to the same file name.
    """
    name = company_name.lower().replace(" ", "-") + ".csv"
    name = _DOT_RUN.sub(".", name)
    return _DASH_RUN.sub("-", name)
