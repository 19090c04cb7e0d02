"""Routed demo: two logging middlewares, body parsers, five routes.

Every request logs ``First Middleware`` then ``Second Middleware`` before
it reaches a route. ``/contact`` fails on purpose to show the error
stage, which logs the traceback and answers ``Something broke!``.
"""

import logging

from sparrow.app import App
from sparrow.config import AppConfig
from sparrow.http.request import Request
from sparrow.http.response import Response
from sparrow.middleware import NEXT, Failure, JSONBodyParser, Step, URLEncodedBodyParser

logger = logging.getLogger("sparrow.demos.express")

app = App(AppConfig(port=3000))


@app.use
def first_middleware(request: Request) -> Step:
    logger.info("First Middleware")
    return NEXT


@app.use
def second_middleware(request: Request) -> Step:
    logger.info("Second Middleware")
    return NEXT


app.use(JSONBodyParser())
app.use(URLEncodedBodyParser(extended=True))


@app.get("/")
def index() -> str:
    return "Hello World!"


@app.get("/about")
def about() -> str:
    return "About Page"


@app.get("/contact")
def contact() -> Failure:
    return Failure(RuntimeError("Contact Page Error"))


@app.get("/profile/:username")
def profile(username: str) -> str:
    return f"Profile page of {username}"


@app.get("/profile/:username/:age")
def profile_with_age(username: str, age: str) -> str:
    return f"Profile page of {username}, Age: {age}"


@app.error_handler
def something_broke(error: Exception, request: Request) -> Response:
    logger.error("Unhandled error on %s %s", request.method, request.path, exc_info=error)
    return Response("Something broke!", status=500)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run()
