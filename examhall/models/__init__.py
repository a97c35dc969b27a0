# Package marker; importing it registers every table on Base.metadata
from examhall.models.user import User  # noqa
from examhall.models.test import Test  # noqa
from examhall.models.question import Question  # noqa
from examhall.models.submission import Submission, Answer  # noqa
