"""titan: build and link Saturnus projects."""