from medrank.core.controller import DashboardController, dashboard

# The controller is a process-wide singleton that owns the application state.
# Tests replace it through app.dependency_overrides[get_controller].

def get_controller() -> DashboardController:
    return dashboard.get_controller()
