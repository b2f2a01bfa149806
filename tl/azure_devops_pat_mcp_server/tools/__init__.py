"""All tools, in catalog order.

``TOOLS`` is the single source for both the advertised catalog and the dispatch table.
"""

from tl.azure_devops_pat_mcp_server.tools import (
    advanced_security,
    core,
    pipelines,
    repositories,
    search,
    test_plans,
    wiki,
    work,
    work_items,
)


TOOLS = tuple(
    core.TOOLS
    + repositories.TOOLS
    + work_items.TOOLS
    + pipelines.TOOLS
    + wiki.TOOLS
    + search.TOOLS
    + test_plans.TOOLS
    + advanced_security.TOOLS
    + work.TOOLS
)
