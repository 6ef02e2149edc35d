from setuptools import setup

setup(
    name="chess-scan",
    version="0.1.0",
    description="Scan a chessboard photo into an editable position and FEN",
    python_requires=">=3.8",
    py_modules=[
        "analysis_links",
        "board_editor",
        "board_model",
        "board_renderer",
        "board_session",
        "config",
        "errors",
        "fen_codec",
        "grid_mapper",
        "image_validation",
        "logger",
        "main",
        "rate_limiter",
        "rules_normalizer",
        "scanner",
        "transforms",
        "validator",
        "vision_client",
    ],
    install_requires=[
        "numpy",
        "opencv-python",
        "chess",
        "requests",
        "python-dotenv",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "chess-scan=main:main",
        ],
    },
)
