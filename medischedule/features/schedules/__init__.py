# Operation Schedules Feature
