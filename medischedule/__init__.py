"""MediSchedule Pro - operating theater scheduling backend."""
