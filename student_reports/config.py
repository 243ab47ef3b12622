import os

# --- Configuration ---
# REPORT_FONT_PATH should point at an Arabic TTF; no font ships with the
# package. Without it the font is looked up in ./fonts of the directory the
# server is started from.
def default_font_path():
    return os.path.join(os.getcwd(), 'fonts', 'Tajawal-Regular.ttf')


FONT_PATH = os.environ.get('REPORT_FONT_PATH') or default_font_path()
FONT_NAME = os.environ.get('REPORT_FONT_NAME', 'Tajawal')
MAX_CONTENT_LENGTH = int(os.environ.get('MAX_UPLOAD_MB', '16')) * 1024 * 1024
PREVIEW_LIMIT = int(os.environ.get('PREVIEW_LIMIT', '5'))

# --- Constants ---
UNKNOWN = 'غير معروف'
REPORT_FILENAME = 'student_reports.pdf'
REPORT_TITLE = 'تقارير نتائج الطلاب'
DATE_LABEL = 'تاريخ'
CLASSROOM_LABEL = 'الصف'

# Page geometry (points)
PAGE_WIDTH = 595
PAGE_HEIGHT = 842
MARGIN = 40
SAFE_MARGIN = 50
HEADER_HEIGHT = 80
ROW_HEIGHT = 25
MIN_NAME_WIDTH = 150

TITLE_SIZE = 20
DATE_SIZE = 12
HEADER_SIZE = 12
GROUP_SIZE = 12
CELL_SIZE = 10
GROUP_SHADE = 0.9

# Left-to-right in x order; the serial column sits on the right edge.
COLUMNS = [
    ('الصف', 'classroom', 60),
    ('الدرجة', 'total', 60),
    ('الاسم', 'name', 270),
    ('المادة', 'course', 130),
    ('م', 'serial', 30),
]

# --- Messages ---
MISSING_INPUT_MESSAGE = 'البيانات المطلوبة غير موجودة'
EMPTY_DATA_MESSAGE = 'لا توجد بيانات صالحة في الملفات المرفوعة'
RENDER_FAILED_MESSAGE = 'فشل إنشاء ملف PDF'
UNKNOWN_ERROR_MESSAGE = 'خطأ غير معروف'
NO_CLASSROOM_DATA = 'لم يتم تحميل بيانات الصف'
NO_COURSE_DATA = 'لم يتم تحميل بيانات المادة'
NO_TOTAL_DATA = 'لم يتم تحميل بيانات المجموع'
NO_FILE_PART_MESSAGE = 'لم يتم إرفاق ملف في الطلب'
NO_FILE_SELECTED_MESSAGE = 'لم يتم اختيار ملف للتحميل'
BAD_FORMAT_MESSAGE = 'صيغة الملف غير مدعومة، الرجاء تحميل ملف CSV أو Excel'
UNREADABLE_FILE_MESSAGE = 'تعذر قراءة الملف المرفوع'
TOO_LARGE_MESSAGE = 'حجم الملف كبير جدا'
