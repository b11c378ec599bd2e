"""
Job Coverage - Coverage Matching and Gap Analysis for job seekers

This application:
1. Parses job postings into required and preferred skills
2. Matches your career data against each requirement, citing evidence
3. Scores overall coverage (required 70%, preferred 30%)
4. Asks targeted questions about the gaps
5. Folds your answers back into your profile and rescores
"""

__version__ = "1.0.0"
__author__ = "Job Coverage"
