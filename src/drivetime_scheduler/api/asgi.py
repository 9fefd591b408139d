"""ASGI entrypoint for the scheduler API."""

from drivetime_scheduler.api.app import create_app
from drivetime_scheduler.containers import build_container

app = create_app(build_container())
