from pr_timesheet.weekly_timesheet import main

main()
