import httpx

from .exceptions import DetailFetchFailure


async def get_detail(url: str, timeout: float = 10.0) -> str:
    """Fetch an object's details from the Clover REST API.

    Args:
        url: Fully resolved endpoint URL, access token included
        timeout: Request timeout in seconds

    Returns:
        Raw response body

    Raises:
        DetailFetchFailure: If the request fails or returns a non-2xx status
    """
    headers = {"Accept": "application/json"}

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            resp = await client.get(url, headers=headers)
            resp.raise_for_status()
            return resp.text
    except httpx.HTTPStatusError as e:
        raise DetailFetchFailure(
            f"Clover API returned {e.response.status_code}", status_code=e.response.status_code
        ) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise DetailFetchFailure(f"Request to Clover API failed: {e.__class__.__name__}") from e
