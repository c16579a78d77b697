from vastraverse.utils.date_utils import DateUtils
from vastraverse.utils.formatting_utils import FormattingUtils
from vastraverse.utils.validators import ValidationUtils

__all__ = ["DateUtils", "FormattingUtils", "ValidationUtils"]
