"""pagevisits_lib – GA4 page-visit reporting shaped for applications.

Public modules
--------------
Core:
    analytics      : Analytics (get_multiple_page_visits, get_top_referrers_for_period, ...)
    reconcile      : build_scaffold, reconcile, series_to_frame
    ranking        : RankedRecord, project, records_to_frame

Query side:
    date_range     : DateRange, calculate_range, to_time_point, parse_compact_date
    queries        : ReportQuery, build_page_visits_query, build_top_referrers_query,
                     build_most_visited_pages_query
    rows           : SeriesRow, RankedRow, parse_series_rows, parse_ranked_rows
    report_client  : ReportClient, ReportResponse, MegatonReportClient, SiteNotFoundError,
                     discover_credentials

Setup:
    config         : AnalyticsConfig
"""
