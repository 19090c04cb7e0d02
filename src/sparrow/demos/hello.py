"""Hello World: the same 200 for every request on port 3000."""

from sparrow.config import AppConfig
from sparrow.responder import Responder

app = Responder("Hello, World!", config=AppConfig(port=3000))

if __name__ == "__main__":
    app.run()
