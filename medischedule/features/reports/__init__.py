# Reports & Dashboards Feature
