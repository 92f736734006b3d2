"""
Write the OpenAPI document for the HTTP adapter to interfaces/openapi.json.

The two generic ``/trpc/{name}`` routes do not show the procedure namespace,
so it is attached as the ``x-procedures`` extension.

Usage:
    python -m taskboard.api.generate_openapi
"""
import json
import os

from taskboard.api.main import app
from taskboard.api.routes import app_router


def build_schema() -> dict:
    schema = app.openapi()
    schema["x-procedures"] = [
        {
            **item,
            "method": "GET" if item["kind"] == "query" else "POST",
            "path": f"/trpc/{item['name']}",
        }
        for item in app_router.describe()
    ]
    return schema


def main(output_dir: str = "interfaces") -> str:
    os.makedirs(output_dir, exist_ok=True)
    output_path = os.path.join(output_dir, "openapi.json")
    with open(output_path, "w") as f:
        json.dump(build_schema(), f, indent=2)
    return output_path


if __name__ == "__main__":
    main()
