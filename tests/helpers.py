from typing import Dict, List, Optional

from bookshelf.schema import DatabaseSchema, parse_schema


def notion_property(prop_type: str, options: Optional[List[str]] = None) -> Dict:
    prop: Dict = {"id": f"id-{prop_type}", "type": prop_type}
    if options is not None:
        prop[prop_type] = {"options": [{"id": name, "name": name} for name in options]}
    else:
        prop[prop_type] = {}
    return prop


def notion_database(properties: Dict[str, Dict], database_id: str = "db-1") -> Dict:
    return {"object": "database", "id": database_id, "properties": properties}


def make_schema(properties: Dict[str, Dict], database_id: str = "db-1") -> DatabaseSchema:
    return parse_schema(database_id, notion_database(properties, database_id))
