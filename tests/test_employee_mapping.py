from __future__ import annotations

from models.backend_responses import SearchPersonResponse
from models.employee import Employee
from services.employee_mapping import (
    group_by_department,
    map_search_response_to_employees,
    merge_employees,
)


def _employee(emp_id: str, departments=None) -> Employee:
    return Employee(id=emp_id, full_name=emp_id, departments=departments or ["Other"])


def test_zero_results_map_and_group_to_empty():
    for body in ({}, {"results": []}, {"results": None, "pagination": {"page": 1, "total_pages": 0}}):
        employees = map_search_response_to_employees(SearchPersonResponse.model_validate(body))
        assert employees == []
        assert group_by_department(employees) == []


def test_maps_current_job_only(make_person):
    raw = make_person("a")
    raw["person"]["job_history"] = [
        {"title": "Intern", "company_name": "Old Co", "current": False, "departments": ["Research"]},
        {"title": "VP Sales", "company_name": "Acme", "current": True, "seniority": "VP", "departments": ["Sales"]},
    ]
    response = SearchPersonResponse.model_validate({"results": [raw]})
    [emp] = map_search_response_to_employees(response)
    assert emp.id == "a"
    assert emp.job_title == "VP Sales"
    assert emp.departments == ["Sales"]
    assert emp.seniority == "VP"
    assert emp.location == "Berlin, Germany"


def test_job_title_fallback_chain(make_person):
    explicit = make_person("a", current_job_title="Head of Growth")
    from_job = make_person("b")
    nothing = make_person("c", job_history=[])
    response = SearchPersonResponse.model_validate({"results": [explicit, from_job, nothing]})
    titles = [e.job_title for e in map_search_response_to_employees(response)]
    assert titles == ["Head of Growth", "Engineer", ""]


def test_departments_default_to_other(make_person):
    no_depts = make_person("a")
    empty_depts = make_person("b", departments=[])
    no_current = make_person("c", job_history=[{"title": "X", "current": False, "departments": ["Sales"]}])
    response = SearchPersonResponse.model_validate({"results": [no_depts, empty_depts, no_current]})
    assert [e.departments for e in map_search_response_to_employees(response)] == [["Other"]] * 3


def test_location_uses_available_parts(make_person):
    city_only = make_person("a", location={"city": "Paris"})
    missing = make_person("b", location=None)
    response = SearchPersonResponse.model_validate({"results": [city_only, missing]})
    a, b = map_search_response_to_employees(response)
    assert a.location == "Paris"
    assert b.location is None


def test_employee_in_every_listed_department(make_person):
    response = SearchPersonResponse.model_validate({"results": [make_person("a", departments=["Sales", "Marketing"])]})
    groups = group_by_department(map_search_response_to_employees(response))
    by_name = {g.name: [e.id for e in g.employees] for g in groups}
    assert by_name == {"Marketing": ["a"], "Sales": ["a"]}


def test_duplicate_department_labels_collapse(make_person):
    response = SearchPersonResponse.model_validate({"results": [make_person("a", departments=["Sales", "Sales", "HR"])]})
    [emp] = map_search_response_to_employees(response)
    assert emp.departments == ["Sales", "HR"]
    assert [len(g.employees) for g in group_by_department([emp])] == [1, 1]


def test_other_sorts_last():
    employees = [_employee("1", ["Other"]), _employee("2", ["Zeta"]), _employee("3", ["Alpha"])]
    assert [g.name for g in group_by_department(employees)] == ["Alpha", "Zeta", "Other"]


def test_sort_ignores_case_with_lowercase_first():
    employees = [_employee("1", ["engineering"]), _employee("2", ["Design"]), _employee("3", ["design"])]
    assert [g.name for g in group_by_department(employees)] == ["design", "Design", "engineering"]


def test_group_keeps_employee_order():
    employees = [_employee("b", ["Sales"]), _employee("a", ["Sales"])]
    [group] = group_by_department(employees)
    assert [e.id for e in group.employees] == ["b", "a"]


def test_merge_dedupes_by_id_and_appends():
    page1 = [_employee("a"), _employee("b")]
    page2 = [_employee("b"), _employee("c")]
    merged, added = merge_employees(page1, page2)
    assert [e.id for e in merged] == ["a", "b", "c"]
    assert [e.id for e in added] == ["c"]
    # Existing record wins over the re-fetched one
    assert merged[1] is page1[1]


def test_merge_dedupes_within_incoming_page():
    merged, added = merge_employees([], [_employee("x"), _employee("x")])
    assert [e.id for e in merged] == ["x"]
    assert len(added) == 1


def test_null_fields_do_not_drop_the_page(make_person):
    body = {
        "results": [
            {"person": {
                "person_id": "a",
                "job_history": [
                    {"title": "Old", "current": None, "departments": ["Research"]},
                    None,
                    {"title": "Eng", "current": True, "departments": [None, "Engineering"]},
                ],
            }},
            {"person": None},
            None,
            make_person("b"),
        ],
    }
    employees = map_search_response_to_employees(SearchPersonResponse.model_validate(body))
    assert [e.id for e in employees] == ["a", "b"]
    assert employees[0].job_title == "Eng"
    assert employees[0].departments == ["Engineering"]


def test_accented_departments_sort_with_their_base_letter():
    employees = [_employee("1", ["Business"]), _employee("2", ["Ärzte"]), _employee("3", ["Zoll"])]
    assert [g.name for g in group_by_department(employees)] == ["Ärzte", "Business", "Zoll"]
