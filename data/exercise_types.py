EXERCISE_TYPES = [
    {"name": "Correr", "description": "Carrera a ritmo moderado", "calories_per_minute": 10, "icon_name": "running"},
    {"name": "Caminar", "description": "Caminata a paso ligero", "calories_per_minute": 5, "icon_name": "footprints"},
    {"name": "Bicicleta", "description": "Ciclismo recreativo", "calories_per_minute": 8, "icon_name": "bike"},
    {"name": "Natación", "description": "Natación estilo libre", "calories_per_minute": 12, "icon_name": "waves"},
    {"name": "Yoga", "description": "Práctica de yoga", "calories_per_minute": 3, "icon_name": "heart"},
    {"name": "Pesas", "description": "Entrenamiento con pesas", "calories_per_minute": 6, "icon_name": "dumbbell"},
    {"name": "Pilates", "description": "Ejercicios de pilates", "calories_per_minute": 4, "icon_name": "activity"},
    {"name": "Baile", "description": "Baile aeróbico", "calories_per_minute": 7, "icon_name": "music"},
]
