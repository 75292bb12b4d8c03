#!/usr/bin/env python3
"""
Quadkey Server

Runs the FastAPI quadkey service under uvicorn. Settings come from the
environment (see quadtree_index.utils.config).
"""

import uvicorn

from quadtree_index.server import create_app
from quadtree_index.utils import Config, configure_logging

config = Config.from_env()
configure_logging(config.log_level, config.log_json)

app = create_app(config)

if __name__ == "__main__":
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        reload=False,
        log_level=config.log_level.lower(),
        access_log=True
    )
