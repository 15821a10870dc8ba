# custody/core/messages.py
# User-facing messages returned in {"error": ...} / {"message": ...} bodies.

EMAIL_TAKEN = "اسم المستخدم مسجل مسبقاً"
INVALID_CREDENTIALS = "اسم المستخدم أو كلمة المرور غير صحيحة"
NOT_AUTHENTICATED = "يجب تسجيل الدخول أولاً"
INVALID_TOKEN = "رمز الدخول غير صالح أو منتهي الصلاحية"
NOT_AUTHORIZED = "غير مصرح لك للوصول"
INVALID_ROLE = "صلاحية غير صالحة"
INVALID_INPUT = "البيانات المدخلة غير صالحة"
SELF_DELETE = "لا يمكنك حذف حسابك الخاص"
USER_NOT_FOUND = "المستخدم غير موجود"
SHEET_NOT_FOUND = "العهدة غير موجودة"

REGISTER_FAILED = "حدث خطأ أثناء التسجيل"
LOGIN_FAILED = "حدث خطأ أثناء تسجيل الدخول"
USERS_FETCH_FAILED = "حدث خطأ أثناء جلب المستخدمين"
USER_CREATE_FAILED = "حدث خطأ أثناء إضافة المستخدم"
USER_UPDATE_FAILED = "حدث خطأ أثناء تعديل المستخدم"
ROLE_UPDATE_FAILED = "حدث خطأ أثناء التحديث"
USER_DELETE_FAILED = "حدث خطأ أثناء الحذف"
SHEETS_FETCH_FAILED = "حدث خطأ أثناء جلب العهد"
SHEET_SAVE_FAILED = "حدث خطأ أثناء حفظ العهدة"
SHEET_DELETE_FAILED = "حدث خطأ أثناء حذف العهدة"
INTERNAL_ERROR = "حدث خطأ غير متوقع في الخادم"

ROLE_UPDATED = "تم تحديث الصلاحية بنجاح"
USER_UPDATED = "تم التعديل بنجاح"
USER_DELETED = "تم حذف المستخدم بنجاح"
SHEET_DELETED = "تم حذف العهدة بنجاح"
