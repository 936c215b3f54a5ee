"""
Application entry point.

    billed show [PATH]   bootstrap the router and print the mounted view
    billed serve         run the local bills API with uvicorn
"""

import argparse
import asyncio
from typing import List, Optional

from billed.config import settings
from billed.core.logging import get_logger, setup_logging
from billed.router import Router
from billed.services.session_storage import FileSessionStorage, SessionStorage
from billed.services.store import ApiStore, Store
from billed.ui.dom import Document
from billed.ui.preview import ModalImagePreview

logger = get_logger(__name__)


def build_router(
    document: Optional[Document] = None,
    storage: Optional[SessionStorage] = None,
    store: Optional[Store] = None,
) -> Router:
    """Wire a router from settings; without STORE_API_URL it runs with no store"""
    document = document or Document()
    storage = storage or FileSessionStorage(settings.SESSION_FILE)
    if store is None and settings.has_store:
        store = ApiStore(settings.STORE_API_URL, storage, timeout=settings.STORE_TIMEOUT)
    if store is None:
        logger.info("No store configured, running disconnected")
    return Router(document, storage, store=store, preview=ModalImagePreview(document))


async def show(path: Optional[str] = None) -> str:
    router = build_router()
    try:
        router.start(path)
        await router.document.settle()
        return router.root.inner_html
    finally:
        if isinstance(router.store, ApiStore):
            await router.store.aclose()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="billed", description=settings.APP_NAME)
    commands = parser.add_subparsers(dest="command")
    show_parser = commands.add_parser("show", help="render the view for a path")
    show_parser.add_argument("path", nargs="?", default=None)
    commands.add_parser("serve", help="run the local bills API")
    args = parser.parse_args(argv)

    setup_logging()

    if args.command == "serve":
        import uvicorn

        uvicorn.run(
            "billed.api.bills_api:app",
            host=settings.HOST,
            port=settings.PORT,
            reload=settings.DEBUG,
            log_level=settings.LOG_LEVEL.lower(),
        )
        return

    print(asyncio.run(show(getattr(args, "path", None))))


if __name__ == "__main__":
    main()
