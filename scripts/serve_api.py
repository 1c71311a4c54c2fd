#!/usr/bin/env python3
import logging

import uvicorn

from backend.app.core.settings import settings

def main():
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    uvicorn.run("backend.app.api.main:app", host="0.0.0.0", port=settings.port)

if __name__ == "__main__":
    main()
