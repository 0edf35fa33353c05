from .base import build_response


def success_response(message: str = None, data=None):
    return build_response(200, True, message=message, data=data)


def data_response(data=None, message: str = "Success"):
    return build_response(200, True, message=message, data=data)


def created_response(data=None, message: str = "Created successfully"):
    return build_response(201, True, message=message, data=data)


def empty_response():
    return build_response(204)
