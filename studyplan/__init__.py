"""
StudyPlan – a terminal planner for courses, terms and grades.
"""
