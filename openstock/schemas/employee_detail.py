from typing import List

from openstock.schemas.attendance import AttendanceOut
from openstock.schemas.employee import EmployeeOut
from openstock.schemas.leave import LeaveRequestOut
from openstock.schemas.payroll import PayrollRunWithPeriod


# Detail view: employee plus recent attendance, leave and payroll history
class EmployeeDetail(EmployeeOut):
    attendance_records: List[AttendanceOut] = []
    leave_requests: List[LeaveRequestOut] = []
    payroll_runs: List[PayrollRunWithPeriod] = []
