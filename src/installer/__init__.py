"""Install script orchestration: host checks, script arguments, environment exports."""
