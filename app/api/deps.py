from fastapi import Request


def get_database(request: Request):
    """
    Return the Database handle the application was created with.
    """
    return request.app.state.database
