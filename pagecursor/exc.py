class BasePagecursorException(Exception):
    pass


class PageRequestError(BasePagecursorException):
    """ Invalid input provided by the User

    Reported when there's something wrong with the Page Request
    """

    def __init__(self, err: str):
        super().__init__(f'Page request error: {err}')


class InvalidColumnError(BasePagecursorException):
    """ Page request mentioned an invalid column name

    Reported when a column mentioned by name is not found on the SqlAlchemy model
    """

    def __init__(self, model: str, column_name: str, where: str):
        self.model = model
        self.column_name = column_name
        self.where = where

        super().__init__(f'Invalid column "{column_name}" for "{model}" specified in {where}')


class RuntimeQueryError(BasePagecursorException):
    """ Uncaught error while building a query

    This class is used to augment other errors
    """
