"""Photos — a gallery whose address bar and view state stay in step.

Demonstrates plural integer parameters, optional parameters, a
remaining path handed to a nested controller, and the ``waymark`` CLI.

Run:
    python app.py

Inspect from the shell:
    waymark routes app:routes --prefix /
    waymark parse app:routes /photos/10&20 --prefix /
    waymark stringify app:routes photo -p photoId=7 --prefix /
"""

from waymark import RouteController

routes = {
    "": "home",
    "photos/+photoIds&": "photos",
    "photo/+photoId": "photo",
    "photo/+photoId/comments/+commentId": "photo-comment",
    "albums/:album?": "albums",
    "help/...": "help",
}

help_routes = {
    "": "index",
    "/:topic": "topic",
}

app = RouteController(routes, prefix="/")
help_pages = RouteController(help_routes)
app.bind_remaining_path(help_pages)


def select(*photo_ids: int) -> None:
    """Show a selection of photos."""
    app.state.parameters = {"photoIds": list(photo_ids)}
    app.state.destination = "photos"


if __name__ == "__main__":
    app.path = "/photos/10&20"
    print(app.state)
    app.state.parameters["photoIds"].append(30)
    print(app.path)
    select(1)
    print(app.path)
    app.path = "/help/shortcuts"
    print(help_pages.state)
