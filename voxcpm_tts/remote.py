"""Connection to the remote Gradio synthesis app."""

import asyncio
import logging

from gradio_client import Client

logger = logging.getLogger(__name__)


def connect(endpoint: str) -> Client:
    """Open a client for the app at endpoint.

    Files are left on the server so results carry their URL instead of
    being downloaded to a temp dir.
    """
    logger.debug("Connecting to %s", endpoint)
    return Client(endpoint, verbose=False, download_files=False)


async def run_blocking(func, *args):
    """Run a blocking client call in the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func, *args)


def disconnect(client: Client) -> None:
    """Stop the client's heartbeat thread and drop its connection.

    A failure here is logged; the request it served has already finished.
    """
    try:
        client.close()
    except Exception as e:
        logger.warning("Closing client failed: %s", e)
