#!/usr/bin/env python3
"""Development server runner for the Al-Khidmat Volunteer Portal."""

import os
import sys
from pathlib import Path

from dotenv import load_dotenv


def setup_environment():
    """Set up the development environment."""
    project_root = Path(__file__).parent
    env_file = project_root / '.env'
    if env_file.exists():
        load_dotenv(env_file)
        print(f"✓ Loaded environment from {env_file}")
    else:
        print(f"⚠️ No .env file found at {env_file}")

    os.environ.setdefault('FLASK_ENV', 'development')
    os.environ.setdefault('FLASK_DEBUG', '1')
    # Local HTTP needs non-secure cookies
    os.environ.setdefault('SESSION_COOKIE_SECURE', 'false')


def check_backend_settings():
    """The portal cannot do anything useful without the managed backend."""
    missing = [name for name in ('SUPABASE_URL', 'SUPABASE_ANON_KEY') if not os.environ.get(name)]
    if missing:
        print(f"❌ Missing settings: {', '.join(missing)}")
        return False
    print(f"✓ Backend: {os.environ['SUPABASE_URL']}")
    return True


def run_development_server():
    """Run the Flask development server."""
    from vms import create_app

    app = create_app()

    print("\n" + "="*60)
    print(f"🚀 Starting {app.config['SITE_NAME']} Volunteer Portal")
    print("="*60)
    print(f"Environment: {os.environ.get('FLASK_ENV', 'production')}")
    print(f"Debug mode: {os.environ.get('FLASK_DEBUG', '0') == '1'}")
    print("\n📱 Access the application at:")
    print("   • http://localhost:5000")
    print("\n⏹️ Press Ctrl+C to stop the server")
    print("="*60)

    app.run(
        host='0.0.0.0',
        port=5000,
        debug=True,
        use_reloader=True
    )


def main():
    """Main function to set up and run the development server."""
    print("Al-Khidmat Volunteer Portal - Development Setup")
    print("="*60)

    setup_environment()

    if not check_backend_settings():
        print("\n❌ Add SUPABASE_URL and SUPABASE_ANON_KEY to .env and try again.")
        sys.exit(1)

    try:
        run_development_server()
    except KeyboardInterrupt:
        print("\n\n🛑 Development server stopped by user")


if __name__ == "__main__":
    main()
