from fastapi import Header
from typing import Literal

ApiVersion = Literal["v1", "v2"]

async def resolve_version(
    x_api_version: str | None = Header(default=None),
) -> ApiVersion:
    """
    Dependency to resolve API version from request headers.
    - 'X-API-Version' values '1'/'v1' select the legacy product shape.
    - '2'/'v2' or no header select the unified shape.
    """
    if x_api_version in {"1","v1"}: return "v1"
    if x_api_version in {"2","v2"}: return "v2"

    return "v2"
