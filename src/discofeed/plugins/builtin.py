"""Built-in source plugins and their facet vocabularies.

Each vocabulary leads with a ``""``-valued option that means "no
constraint", matching the default facet values of ``FilterSelection``.
"""

from __future__ import annotations

from discofeed.models import Option, OptionSet, PluginInfo


def _opts(*pairs: tuple[str, str]) -> tuple[Option, ...]:
    return tuple(Option(value, label) for value, label in pairs)


MANHUAGUI = PluginInfo(
    value="MHG",
    label="ManHuaGui",
    options=OptionSet(
        type_options=_opts(
            ("", "All types"),
            ("rexue", "Action"),
            ("maoxian", "Adventure"),
            ("gaoxiao", "Comedy"),
            ("aiqing", "Romance"),
            ("xuanyi", "Mystery"),
        ),
        region_options=_opts(
            ("", "All regions"),
            ("japan", "Japan"),
            ("hongkong", "Hong Kong"),
            ("china", "Mainland"),
            ("korea", "Korea"),
            ("other", "Other"),
        ),
        status_options=_opts(
            ("", "Any status"),
            ("lianzai", "Ongoing"),
            ("wanjie", "Completed"),
        ),
        sort_options=_opts(
            ("", "Default order"),
            ("latest", "Latest"),
            ("popular", "Popular"),
            ("rate", "Top rated"),
        ),
    ),
)

COPYMANGA = PluginInfo(
    value="COPY",
    label="CopyManga",
    options=OptionSet(
        type_options=_opts(
            ("", "All types"),
            ("aiqing", "Romance"),
            ("huanlexiang", "Comedy"),
            ("mofa", "Fantasy"),
        ),
        region_options=_opts(
            ("", "All regions"),
            ("japan", "Japan"),
            ("korea", "Korea"),
            ("west", "Western"),
        ),
        status_options=_opts(
            ("", "Any status"),
            ("ongoing", "Ongoing"),
            ("finished", "Completed"),
        ),
        sort_options=_opts(
            ("latest", "Latest"),
            ("popular", "Popular"),
        ),
    ),
)

# Search-only source: no discovery facets at all
JMC = PluginInfo(value="JMC", label="JMComic")

DONGMANZHIJIA = PluginInfo(
    value="DMZJ",
    label="DongManZhiJia",
    disabled=True,
    options=OptionSet(
        sort_options=_opts(("latest", "Latest"), ("popular", "Popular")),
    ),
)

BUILTIN_PLUGINS: tuple[PluginInfo, ...] = (MANHUAGUI, COPYMANGA, JMC, DONGMANZHIJIA)

DEFAULT_PLUGIN = MANHUAGUI.value
