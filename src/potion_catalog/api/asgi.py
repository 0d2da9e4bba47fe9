"""ASGI entrypoint for the potion catalog API."""

from potion_catalog.api.app import create_app
from potion_catalog.containers import build_container

app = create_app(build_container())
