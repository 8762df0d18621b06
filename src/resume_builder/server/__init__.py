from resume_builder.server.app import create_app

__all__ = ["create_app"]
