"""
GrowthMindz Admin - Application Entry Point
Run the Flask application
"""
import os
from dotenv import load_dotenv

# Load environment variables BEFORE importing the app or config
load_dotenv()

from lms_admin import create_app

# Schema reconciliation completes inside create_app
app = create_app(os.environ.get('FLASK_ENV', 'development'))

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5001))
    debug = os.environ.get('FLASK_DEBUG', 'false').lower() == 'true'

    print(f"""
    GrowthMindz Admin API
      Server running at: http://localhost:{port}
      Health Check:      http://localhost:{port}/health
    """)

    app.run(host='0.0.0.0', port=port, debug=debug)
