import os
from dotenv import load_dotenv

# Load environment variables before the configuration classes read them
load_dotenv()

from clinic import create_app  # noqa: E402

# Determine configuration based on environment
config_name = os.environ.get('FLASK_ENV', 'development')

# Create application instance
app = create_app(config_name)

if __name__ == '__main__':
    # Retrieve configuration from environment or use defaults
    host = os.environ.get('FLASK_HOST', '0.0.0.0')
    port = int(os.environ.get('FLASK_PORT', 5000))
    debug_mode = config_name == 'development'

    # Run the application with flexible configuration
    app.run(
        host=host,
        port=port,
        debug=debug_mode
    )
