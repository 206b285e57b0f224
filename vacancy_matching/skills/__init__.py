from vacancy_matching.skills.resolver import load_alias_map, synonym_table_with_aliases

__all__ = [
    "load_alias_map",
    "synonym_table_with_aliases",
]
