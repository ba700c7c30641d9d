"""Common literal values used across page_scaffold.

These constants keep filenames, suffixes, and module specifiers centralized so
templates, the normalizer, and tests can import the same values without
drifting. Intended for internal use within the page_scaffold package.

Examples
--------
>>> from page_scaffold import _constants
>>> _constants.LAYOUT_SYMBOL
'Layout'
>>> "travel/index.astro".endswith(_constants.DEFAULT_PAGE_SUFFIX)
True
"""

LAYOUT_SYMBOL = "Layout"
LINK_LIST_SYMBOL = "LinkList"

DEFAULT_PAGE_SUFFIX = ".astro"
DEFAULT_BACKUP_SUFFIX = ".bak"

DEFAULT_PAGES_ROOT = "src/pages"
DEFAULT_LAYOUT_FILE = "src/layouts/Page.astro"
DEFAULT_LINK_LIST_FILE = "src/components/LinkList.astro"
DEFAULT_REGISTRY_FILE = "src/links/registry.ts"
DEFAULT_PORTFOLIO_OUTPUT = "src/data/portfolio.json"

DEFAULT_LAYOUT_IMPORT = "@layouts/Page.astro"
DEFAULT_LINK_LIST_IMPORT = "@components/LinkList.astro"
DEFAULT_REGISTRY_IMPORT = "@links/registry"
