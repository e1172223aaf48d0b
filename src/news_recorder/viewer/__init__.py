"""Viewer service for recorded results."""

from news_recorder.viewer.app import create_app, serve

__all__ = ["create_app", "serve"]
