"""
Administrative reports.

A report supplies its rows as a complete source list; the grid view sorts, filters
and pages a copy of it, while CSV export and print always read the source.
"""
