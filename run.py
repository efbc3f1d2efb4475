from config import Config
from cvportal import create_app

app = create_app()

if __name__ == "__main__":
    print(f"Server running on port {Config.PORT}")
    app.run(host="0.0.0.0", port=Config.PORT)
