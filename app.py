"""Hugging Face Spaces entry point."""

from galton_board.visualization.dash_app import app

server = app.server  # expose Flask server for gunicorn fallback

if __name__ == "__main__":
    import os
    from galton_board.core.config import configure_logging
    configure_logging()
    port = int(os.environ.get("PORT", 7860))
    app.run(host="0.0.0.0", debug=False, port=port)
