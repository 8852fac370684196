"""String field type shared by the persisted models."""

from typing import Annotated

from pydantic import AfterValidator


def scrub_surrogates(value: str) -> str:
    """Replace lone UTF-16 surrogates (e.g. from a ``"\\ud800"`` JSON escape) with '?'.

    Such strings cannot be encoded as UTF-8, so a state holding one could not
    be written back out.
    """
    return value.encode("utf-8", "replace").decode("utf-8")


# Plain text that is always UTF-8 encodable.
Text = Annotated[str, AfterValidator(scrub_surrogates)]
