from .viewmodels import (
    country_flag, format_latency, latency_color, format_speed, speed_color,
    kind_label, detail_panel_size,
    NodeRowViewModel, DetailPanelViewModel, RuleHeaderViewModel,
    LegendEntry, LEGEND, MatchRowViewModel, MatchSummaryViewModel,
    EMPTY_RULES_MESSAGE, EMPTY_MEMBERS_MESSAGE,
)

__all__ = [
    'country_flag', 'format_latency', 'latency_color', 'format_speed', 'speed_color',
    'kind_label', 'detail_panel_size',
    'NodeRowViewModel', 'DetailPanelViewModel', 'RuleHeaderViewModel',
    'LegendEntry', 'LEGEND', 'MatchRowViewModel', 'MatchSummaryViewModel',
    'EMPTY_RULES_MESSAGE', 'EMPTY_MEMBERS_MESSAGE',
]
