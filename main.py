import logging

import uvicorn

from restaurant_pos.dependencies import settings
from restaurant_pos.web import app

if __name__ == '__main__':
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(threadName)s [%(name)s] %(levelname)-8s %(message)s")
    uvicorn.run(app, host="0.0.0.0")
