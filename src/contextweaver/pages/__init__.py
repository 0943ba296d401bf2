"""NiceGUI pages for Context Weaver.

Import this module to register all page routes with NiceGUI.
"""

from contextweaver.pages import auth, collections, connections, index, viewer

__all__ = ["auth", "collections", "connections", "index", "viewer"]

# These imports register @ui.page decorators as a side effect.
_PAGES = (auth, collections, connections, index, viewer)
