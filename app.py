"""Development entrypoint delegating to the application package."""

import logging
import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

from emailspy.main import create_app  # noqa: E402

app = create_app()


if __name__ == "__main__":
    # The reloader would start a second sweeper and a second set of stores.
    app.run(host="0.0.0.0", port=5050, debug=True, use_reloader=False)
