# Importing the package registers every table on its store's declarative base
from openstock.models import log, catalog, product, stock, pricing, settings  # noqa: F401
from openstock.models import employee, attendance, leave, payroll  # noqa: F401
from openstock.models import finance  # noqa: F401
