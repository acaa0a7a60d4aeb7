"""
Error types for the tutoring backend
"""


class TutorError(Exception):
    """Base class for tutoring errors"""
    pass


class GenerationFailure(TutorError):
    """The concept graph could not be generated or parsed"""
    pass


class ChatFailure(TutorError):
    """A chat turn could not be exchanged with the model"""
    pass


class SessionBusyError(TutorError):
    """A model call is already outstanding for this session"""
    pass
