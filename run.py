#!/usr/bin/env python
"""Development server with hot reload support."""

import logging

from contextweaver import main

if __name__ in {"__main__", "__mp_main__"}:
    # DEBUG logging to console for development
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(name)s: %(message)s",
    )
    logging.getLogger("watchfiles").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    main()
