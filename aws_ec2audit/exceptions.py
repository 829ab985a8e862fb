"""
Exceptions raised by AWS EC2 Audit
"""


class CollaboratorError(Exception):
    """
    An AWS call needed by a rule could not complete.

    Raised for network and authorization failures and for malformed or
    incomplete responses. The runner reports it as an Error finding and moves on.
    """

    def __init__(self, message, resource_id=None):
        super().__init__(message)
        self.resource_id = resource_id
