# run.py
import logging
from cvmate.app import create_app, db

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        db.create_all()
    logger.info("Starting CVMate server on http://127.0.0.1:5000")
    app.run(debug=False, host="127.0.0.1", port=5000)
