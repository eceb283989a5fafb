"""
Job board API: companies, jobs and users over raw SQL.
"""
