# storefront/db/redis.py
import logging
import redis.asyncio as redis

logger = logging.getLogger(__name__)


async def connect(url: str, token: str = "") -> redis.Redis | None:
    """
    Connect to the remote key-value service if a URL is configured.
    Returns None when unconfigured or unreachable; the caller decides whether
    that is fatal (explicit remote-kv) or a fallback case (auto).
    """
    if not url:
        logger.info("No KV_URL configured, skipping KV connection.")
        return None

    options = {"password": token} if token else {}
    client = redis.from_url(url, decode_responses=True, **options)
    try:
        await client.ping()
        logger.info("KV connection successful")
        return client
    except Exception as e:
        logger.warning("Failed to connect to KV service: %s", e)
        await client.aclose()
        return None


async def disconnect(client: redis.Redis | None) -> None:
    """Close the KV connection if it exists."""
    if client:
        await client.aclose()
        logger.info("KV disconnected")
