"""Workout templates - reusable exercise lists with per-exercise defaults."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException

from workout_engine.api.deps import get_store
from workout_engine.db.store import WorkoutStore
from workout_engine.models.exercise import Exercise
from workout_engine.models.template import TemplateExercise, WorkoutTemplate
from workout_engine.schemas.template import WorkoutTemplateCreate, WorkoutTemplateRead

router = APIRouter()


@router.get("", response_model=list[WorkoutTemplateRead])
async def list_templates(store: WorkoutStore = Depends(get_store)):
    """List templates, most recently used first."""
    templates = await store.fetch(
        WorkoutTemplate,
        order_by=[WorkoutTemplate.last_used_at.desc(), WorkoutTemplate.created_at.desc()],
    )
    return list(templates)


@router.post("", response_model=WorkoutTemplateRead, status_code=201)
async def create_template(payload: WorkoutTemplateCreate, store: WorkoutStore = Depends(get_store)):
    """Create a template; exercise order follows the request order."""
    t = WorkoutTemplate(name=payload.name)
    for i, item in enumerate(payload.exercises):
        exercise = await store.get(Exercise, item.exercise_id)
        if exercise is None:
            raise HTTPException(status_code=404, detail=f"Exercise {item.exercise_id} not found")
        t.exercises.append(
            TemplateExercise(
                exercise=exercise,
                order=i,
                default_sets=item.default_sets,
                default_reps=item.default_reps,
                default_weight=item.default_weight,
            )
        )
    store.create(t)
    await store.save()
    return t


@router.get("/{template_id}", response_model=WorkoutTemplateRead)
async def get_template(template_id: uuid.UUID, store: WorkoutStore = Depends(get_store)):
    t = await store.get(WorkoutTemplate, template_id)
    if not t:
        raise HTTPException(status_code=404, detail="Template not found")
    return t


@router.delete("/{template_id}", status_code=204)
async def delete_template(template_id: uuid.UUID, store: WorkoutStore = Depends(get_store)):
    t = await store.get(WorkoutTemplate, template_id)
    if not t:
        raise HTTPException(status_code=404, detail="Template not found")
    await store.delete(t)
    await store.save()
    return None
