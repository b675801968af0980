"""50/30/20 budgeting: split income into needs, wants and savings."""
