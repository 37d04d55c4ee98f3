"""
Site name resolution for grouping launches by launch site.
"""
from typing import Callable

from launch_stats.models.schemas import Launch, UNKNOWN_SITE


SiteNameResolver = Callable[[Launch], str]


def placeholder_site_name(launch: Launch) -> str:
    """
    Resolve a launch to a site label.

    Launch records carry no launchpad information, so a named launch is
    labelled with its own id and everything else falls into "Unknown Site".
    In practice every named launch becomes its own site. Pass a different
    resolver to the aggregator to group by a real launchpad.
    """
    if launch.name and launch.name.strip():
        return launch.id if launch.id is not None else UNKNOWN_SITE
    return UNKNOWN_SITE
