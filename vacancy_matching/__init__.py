"""Vacancy matching: score, explain and rank candidates against open vacancies."""
